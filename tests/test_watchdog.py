import pytest

from travel_safety.watchdog import SLOW_REQUEST_SECONDS, WatchdogLogger, get_watchdog, monitor_function


@pytest.fixture
def watchdog(tmp_path):
    return WatchdogLogger(str(tmp_path / 'runtime.log'))


def test_request_counters(watchdog):
    watchdog.log_request_start('GET', '/api/sentiment', client_ip='127.0.0.1')
    watchdog.log_request_end('GET', '/api/sentiment', 200, duration=0.2)
    watchdog.log_request_start('GET', '/api/assessment')
    watchdog.log_request_end('GET', '/api/assessment', 200, duration=SLOW_REQUEST_SECONDS + 1)

    stats = watchdog.get_performance_stats()

    assert stats['request_count'] == 2
    assert stats['slow_requests'] == 1
    assert stats['avg_response_time_ms'] == pytest.approx((0.2 + SLOW_REQUEST_SECONDS + 1) / 2 * 1000)


def test_request_end_without_start_time(watchdog):
    watchdog.log_request_end('GET', '/health', 200, duration=None)
    assert watchdog.get_performance_stats()['total_response_time'] == 0.0


def test_exceptions_are_counted_and_written(watchdog, tmp_path):
    watchdog.log_exception('RuntimeError', 'boom', ['Traceback...\n'], context='TEST')

    assert watchdog.get_performance_stats()['error_count'] == 1
    assert 'RuntimeError: boom' in (tmp_path / 'runtime.log').read_text(encoding='utf-8')


def test_empty_stats(watchdog):
    assert watchdog.get_performance_stats()['avg_response_time_ms'] == 0


def test_get_watchdog_is_shared():
    assert get_watchdog() is get_watchdog()


def test_monitor_function_reraises():
    @monitor_function(warn_slow=10.0)
    def explode():
        raise KeyError('missing')

    before = get_watchdog().get_performance_stats()['error_count']
    with pytest.raises(KeyError):
        explode()
    assert get_watchdog().get_performance_stats()['error_count'] == before + 1
