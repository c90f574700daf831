"""Application constants that never change across environments.

These are fixed facts about the City record and the response contract,
not tunables (tunables live in ``cities_api.config``).
"""

# ===== City Fields =====
FIELD_NAME = "name"
FIELD_POPULATION = "population"
FIELD_COUNTRY = "country"
FIELD_LATITUDE = "latitude"
FIELD_LONGITUDE = "longitude"

# Declared field set, in response order. Filters, sort keys and projections
# are looked up against this tuple.
CITY_FIELDS = (
    FIELD_NAME,
    FIELD_POPULATION,
    FIELD_COUNTRY,
    FIELD_LATITUDE,
    FIELD_LONGITUDE,
)
TEXT_FIELDS = frozenset({FIELD_NAME, FIELD_COUNTRY})
NUMERIC_FIELDS = frozenset({FIELD_POPULATION, FIELD_LATITUDE, FIELD_LONGITUDE})

# ===== Geographic Constants =====
MIN_LATITUDE = -90.0
MAX_LATITUDE = 90.0
MIN_LONGITUDE = -180.0
MAX_LONGITUDE = 180.0

# ===== Sort Tokens =====
SORT_ASC = "asc"
SORT_DESC = "desc"
SORT_SEPARATOR = ":"
FIELDS_SEPARATOR = ","

# ===== Pagination =====
# Largest skip a BSON int64 can carry.
MAX_SKIP = 2 ** 63 - 1

# ===== Response Messages =====
MSG_CITY_ADDED = "City added successfully."
MSG_CITY_UPDATED = "City updated successfully."
MSG_CITY_DELETED = "City deleted successfully."
MSG_CITY_NOT_FOUND = "City not found."
MSG_INVALID_SORT = "Invalid sort parameter. Use 'field:asc' or 'field:desc'."
