# strivio/utils/__init__.py
