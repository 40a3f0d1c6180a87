"""Labour management backend.

Feature modules (users, labourers, projects, attendance, leaves, performance,
payroll, notifications) each follow the same layering: a frozen model, a
repository protocol with a MongoDB implementation, a service holding the
business rules and a thin Flask controller.
"""
