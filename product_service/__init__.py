# product_service/__init__.py
