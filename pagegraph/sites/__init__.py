"""Site definitions built with PageGraph."""
