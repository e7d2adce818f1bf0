"""
Notifications Service: Уведомления о событиях других сервисов.
"""
