from security.rate_limiter import RateLimiter


def test_blocks_after_limit_within_window():
    limiter = RateLimiter(limit=3, window=60)
    assert all(limiter.hit(1, now=100.0 + i) for i in range(3))
    assert limiter.hit(1, now=110.0) is False


def test_users_are_tracked_separately():
    limiter = RateLimiter(limit=1, window=60)
    assert limiter.hit(1, now=100.0)
    assert limiter.hit(2, now=100.0)
    assert limiter.hit(1, now=101.0) is False


def test_window_slides():
    limiter = RateLimiter(limit=2, window=60)
    assert limiter.hit(1, now=0.0)
    assert limiter.hit(1, now=30.0)
    assert limiter.hit(1, now=59.0) is False
    # the first hit has expired
    assert limiter.hit(1, now=61.0)
    assert limiter.hit(1, now=62.0) is False


def test_sweep_forgets_idle_users():
    limiter = RateLimiter(limit=5, window=60)
    for user_id in range(1, 101):
        limiter.hit(user_id, now=0.0)
    limiter.hit(500, now=50.0)
    assert limiter.tracked_users() == 101

    assert limiter.sweep(now=61.0) == 100
    assert limiter.tracked_users() == 1
    assert 1 not in limiter._hits


def test_sweep_keeps_hits_inside_the_window():
    limiter = RateLimiter(limit=2, window=60)
    limiter.hit(1, now=30.0)
    limiter.sweep(now=61.0)
    limiter.hit(1, now=62.0)
    assert limiter.hit(1, now=63.0) is False


def test_blocked_user_is_not_kept_forever():
    limiter = RateLimiter(limit=1, window=60)
    limiter.hit(7, now=0.0)
    assert limiter.hit(7, now=1.0) is False
    limiter.sweep(now=120.0)
    assert 7 not in limiter._hits
    assert limiter.hit(7, now=121.0)
