"""Cross-cutting helpers: settings, logging, typed errors and value coercion."""
