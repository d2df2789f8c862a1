# Services package.
#
# Each module exposes one service class that encapsulates the business
# rules for a domain aggregate:
#
#   account_service  — registration, login and profile edits for User
#   catalog_service  — CRUD for Podcast and its nested Episodes
#
# Services receive their stores (and, for accounts, the JwtService)
# through the constructor and return result objects instead of raising;
# the router layer owns the transaction via the ``get_db`` dependency.
