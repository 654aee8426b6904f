"""Gate Pass package.

Organized by feature modules (users, passes, notifications) with a thin Flask
controller layer over service and repository layers.
"""
