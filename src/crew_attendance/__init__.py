"""Crew Attendance package.

Organized by feature modules (attendance punches, leave, hours) with a thin
Flask controller layer over pure domain logic and repository protocols.
"""
