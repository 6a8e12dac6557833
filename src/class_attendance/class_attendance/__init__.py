"""Class Attendance package.

Organized by feature modules (roster, attendance, reports, identity) with a
thin Flask controller layer over service/repository layers and a pluggable
document store.
"""
