from rakugaki.infrastructure.services.rate_limiter import RateLimiter, RateLimiterConfig, RateLimitResult
from rakugaki.infrastructure.services.sweeper import PeriodicSweeper

__all__ = ["PeriodicSweeper", "RateLimiter", "RateLimiterConfig", "RateLimitResult"]
