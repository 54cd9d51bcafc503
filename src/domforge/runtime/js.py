"""
Client runtime shipped to the browser.

The runtime mirrors ``RuntimeContext``: a ``window.components`` factory
registry filled by component scripts, a per-key node cache, and the
``renderComponent`` / ``removeComponent`` / ``loadComponent`` globals that
markup ``onclick`` attributes call.
"""

from __future__ import annotations

import json

RUNTIME_JS = '''/**
 * domforge client runtime
 * Mounts and unmounts compiled component factories.
 */
(function (global) {
  const components = global.components = global.components || {};
  const componentCache = new Map();
  const pendingLoads = new Map();
  const componentBaseUrl = __COMPONENT_BASE_URL__;

  /**
   * Mount a clone of a component under an element.
   * The factory runs once; later calls clone the cached node.
   * @param {string} key - Component key
   * @param {string} parentId - Id of the element to mount under
   * @returns {Node|null} - The mounted node
   */
  function renderComponent(key, parentId, ...args) {
    const parent = document.getElementById(parentId);
    if (!parent) {
      console.error(`Render target not found: #${parentId}`);
      return null;
    }
    const factory = components[key];
    if (typeof factory !== 'function') {
      console.error(`Component not found: ${key}`);
      return null;
    }
    if (!componentCache.has(key)) {
      componentCache.set(key, factory(...args));
    }
    const node = componentCache.get(key).cloneNode(true);
    parent.appendChild(node);
    return node;
  }

  /**
   * Detach an element from its parent.
   * @param {string} id - Element id
   * @returns {boolean} - false if the element was missing
   */
  function removeComponent(id) {
    const el = document.getElementById(id);
    if (!el) {
      console.error(`Element not found: #${id}`);
      return false;
    }
    el.remove();
    return true;
  }

  /**
   * Load a component script on demand.
   * @param {string} key - Component key
   * @returns {Promise<string>} - Resolves once the factory is registered
   */
  function loadComponent(key) {
    if (typeof components[key] === 'function') {
      return Promise.resolve(key);
    }
    if (pendingLoads.has(key)) {
      return pendingLoads.get(key);
    }
    const promise = new Promise((resolve, reject) => {
      const script = document.createElement('script');
      script.src = `${componentBaseUrl}/${encodeURIComponent(key)}.js`;
      script.onload = () => {
        pendingLoads.delete(key);
        if (typeof components[key] === 'function') {
          resolve(key);
        } else {
          reject(new Error(`Script for ${key} did not register a factory`));
        }
      };
      script.onerror = () => {
        pendingLoads.delete(key);
        console.error(`Failed to load component: ${key}`);
        reject(new Error(`Failed to load component: ${key}`));
      };
      document.head.appendChild(script);
    });
    pendingLoads.set(key, promise);
    return promise;
  }

  global.renderComponent = renderComponent;
  global.removeComponent = removeComponent;
  global.loadComponent = loadComponent;
})(typeof window !== 'undefined' ? window : globalThis);
'''

RUNTIME_GLOBALS = ("renderComponent", "removeComponent", "loadComponent")


def get_runtime_js(component_base_url: str = "./components") -> str:
    """
    Get the client runtime script.

    Args:
        component_base_url: URL prefix ``loadComponent`` fetches ``<key>.js`` from

    Returns:
        JavaScript source
    """
    return RUNTIME_JS.replace("__COMPONENT_BASE_URL__", json.dumps(component_base_url.rstrip("/")))
