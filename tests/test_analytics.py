"""Tests for the daily analytics log and threshold alerts."""

import json
from datetime import datetime, timedelta, timezone

import pytest

from travel_safety.analytics import AlertMonitor, AnalyticsLog, evaluate_alerts

NOW = datetime(2024, 12, 15, 12, 0, tzinfo=timezone.utc)


def entries(event, count, age=timedelta(hours=1)):
    ts = (NOW - age).isoformat()
    return [{'timestamp': ts, 'event': event} for _ in range(count)]


def alert_ids(logs):
    return [alert.id for alert in evaluate_alerts(logs, now=NOW)]


def test_log_appends_json_lines(tmp_path):
    log = AnalyticsLog(tmp_path / 'logs')

    log.log('widget_search', query='Paris')
    log.log('widget_vote', vote='safe')

    files = list((tmp_path / 'logs').glob('*.log'))
    assert len(files) == 1
    lines = files[0].read_text(encoding='utf-8').splitlines()
    assert [json.loads(line)['event'] for line in lines] == ['widget_search', 'widget_vote']
    assert json.loads(lines[0])['query'] == 'Paris'


def test_recent_reads_back_newest_first_and_skips_bad_lines(tmp_path):
    log = AnalyticsLog(tmp_path)
    today = tmp_path / f"{NOW.strftime('%Y-%m-%d')}.log"
    yesterday = tmp_path / f"{(NOW - timedelta(days=1)).strftime('%Y-%m-%d')}.log"
    today.write_text(json.dumps({'timestamp': NOW.isoformat(), 'event': 'b'}) + '\nnot json\n\n', encoding='utf-8')
    yesterday.write_text(json.dumps({'timestamp': (NOW - timedelta(days=1)).isoformat(), 'event': 'a'}) + '\n',
                         encoding='utf-8')

    recent = log.recent(days=7, now=NOW)

    assert [e['event'] for e in recent] == ['b', 'a']
    assert log.recent(days=1, now=NOW)[0]['event'] == 'b'
    assert len(log.recent(days=1, now=NOW)) == 1


def test_no_alerts_for_quiet_logs():
    assert evaluate_alerts([], now=NOW) == []


@pytest.mark.parametrize('count, fires', [(5, False), (6, True)])
def test_tool_error_threshold(count, fires):
    assert ('tool-errors' in alert_ids(entries('tool_call_error', count))) is fires


def test_tool_errors_older_than_a_day_are_ignored():
    logs = entries('tool_call_error', 10, age=timedelta(days=2))
    assert alert_ids(logs) == []


@pytest.mark.parametrize('count, fires', [(3, False), (4, True)])
def test_parse_error_threshold(count, fires):
    assert ('parse-errors' in alert_ids(entries('parameter_parse_error', count))) is fires


def test_empty_result_rate():
    assert alert_ids(entries('tool_call_success', 8) + entries('tool_call_empty', 2)) == []
    assert alert_ids(entries('tool_call_success', 7) + entries('tool_call_empty', 3)) == ['empty-results']


def test_widget_crash_is_critical():
    alerts = evaluate_alerts(entries('widget_crash', 1), now=NOW)
    assert alerts[0].id == 'widget-crash'
    assert alerts[0].level == 'critical'


def test_subscribe_failures_need_minimum_sample():
    small = entries('widget_notify_me_subscribe', 2) + entries('widget_notify_me_subscribe_error', 2)
    assert alert_ids(small) == []

    large = entries('widget_notify_me_subscribe', 8) + entries('widget_notify_me_subscribe_error', 2)
    alerts = evaluate_alerts(large, now=NOW)
    assert [a.id for a in alerts] == ['buttondown-failures']
    assert '(2/10)' in alerts[0].message


def test_entries_without_timestamp_are_ignored():
    assert alert_ids([{'event': 'widget_crash'}, {'event': 'widget_crash', 'timestamp': 'bad'}]) == []


def test_alert_to_dict():
    alert = evaluate_alerts(entries('widget_crash', 1), now=NOW)[0]
    assert set(alert.to_dict()) == {'id', 'level', 'message'}


def test_alert_monitor_run_once(tmp_path):
    log = AnalyticsLog(tmp_path)
    log.log('widget_crash', message='boom')

    alerts = AlertMonitor(log).run_once()

    assert [a.id for a in alerts] == ['widget-crash']


def test_alert_monitor_start_and_stop(tmp_path):
    monitor = AlertMonitor(AnalyticsLog(tmp_path), interval_seconds=3600)
    monitor.start()
    assert monitor._thread.is_alive()
    monitor.stop()
    assert monitor._thread is None
