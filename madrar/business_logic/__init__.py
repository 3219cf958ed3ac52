# madrar/business_logic/__init__.py
# Managers are imported from their modules; importing them here would cycle
# through the repositories, which import the entities from this package.
