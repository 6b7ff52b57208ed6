# conftest.py
pytest_plugins = ["restpact.pytest_plugin"]
