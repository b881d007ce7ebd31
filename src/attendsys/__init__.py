"""attendsys package.

Multi-tenant attendance tracker organized by feature modules (users,
organizations, employees, attendance) with a thin Flask controller layer over
service/repository layers.
"""
