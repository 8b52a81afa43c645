# src/coinclock/__main__.py
from coinclock.app import main

main()
