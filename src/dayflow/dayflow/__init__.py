"""DayFlow HR package.

Organized by feature modules (attendance, otp, users, employees, leave, payroll)
with a thin Flask controller layer over service/repository layers. All state
lives behind a key-value storage port.
"""
