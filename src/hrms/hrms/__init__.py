"""HRMS attendance package.

Feature modules (attendance, policy, employees, reports) each keep a thin
Flask controller over a service that talks to repository protocols.
"""
