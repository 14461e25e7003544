"""
remindpay backend application package

Personal reminder service: owner-scoped reminder CRUD plus the recurring
reminder scheduling engine (sweep + upcoming window).
"""
