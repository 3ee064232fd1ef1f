"""
UTILITIES PACKAGE
=================

Helpers used by the services (no HTTP, no business logic):

  fallback - with_fallback(candidates, attempt, is_fatal): first success wins;
             fatal errors stop the loop; otherwise the last error is raised.
"""
