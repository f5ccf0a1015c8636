"""Exit codes for marketplace CLI commands.

Validation failures and fatal faults share GENERAL_ERROR; the report
footer tells them apart.
"""

# Success
SUCCESS = 0

# Errors
GENERAL_ERROR = 1
INVALID_ARGS = 2
