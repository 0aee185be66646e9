"""
sidkik_firebase.rules

Security rules deployment package.

Responsibilities:
- Rule family definitions and release naming.
- Typed ruleset/release payloads.
- Latest-active ruleset resolution and the create-then-release protocol.
"""

# Package marker.


# --- Module Notes -----------------------------------------------------------
# Rulesets are immutable on the server; "updating" rules always means deploying a
# new ruleset and repointing the family release at it.
