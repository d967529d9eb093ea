# backend/wsgi.py
from shoppos import create_app

app = create_app()
