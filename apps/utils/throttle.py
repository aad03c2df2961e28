from rest_framework.throttling import AnonRateThrottle


class AuthRateThrottle(AnonRateThrottle):
    """
    Strict IP-based throttling for register and login attempts.
    Scope: 'auth' (Configured in settings via AUTH_THROTTLE_RATE)
    """
    scope = 'auth'
