"""Price service endpoint modules (internal)."""
