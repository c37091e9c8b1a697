# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access for a single domain aggregate:
#
#   user_service  - CRUD + permission rules for User
#   post_service  - CRUD + filtering + ownership checks for Post
#   auth_service  - register / login / refresh and acting-user lookup
#   pagination    - shared offset/limit envelope builder
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.  Failures are raised as ``blogcore.exceptions``.
