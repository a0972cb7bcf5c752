# strivio/ui/__init__.py
