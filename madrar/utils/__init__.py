# madrar/utils/__init__.py
