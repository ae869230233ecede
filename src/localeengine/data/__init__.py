"""Resource bundles shipped with localeengine (one JSON object per locale)."""
