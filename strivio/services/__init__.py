# strivio/services/__init__.py
