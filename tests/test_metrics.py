# -*- coding: utf-8 -*-
from cds_hooks.utils.metrics import ServiceMetrics


class TestServiceMetrics:
    def test_empty_snapshot(self):
        snap = ServiceMetrics().snapshot()
        assert snap["requests"] == {"total": 0, "byHook": {}}
        assert snap["responseTimes"]["average"] == 0.0
        assert snap["responseTimes"]["p95"] == 0.0
        assert snap["errors"]["total"] == 0

    def test_percentiles(self):
        m = ServiceMetrics()
        for ms in range(1, 101):
            m.record_response_time("patient-view", float(ms))
        times = m.snapshot()["responseTimes"]
        assert times["average"] == 50.5
        assert (times["p50"], times["p95"], times["p99"]) == (50.0, 95.0, 99.0)
        assert times["byHook"]["patient-view"]["count"] == 100

    def test_window_is_bounded(self):
        m = ServiceMetrics(window=3)
        for ms in (100.0, 1.0, 2.0, 3.0):
            m.record_response_time("order-review", ms)
        assert m.snapshot()["responseTimes"]["average"] == 2.0

    def test_counters(self):
        m = ServiceMetrics()
        m.record_request("patient-view")
        m.record_request("patient-view")
        m.record_cards(critical=1, info=2)
        m.record_error("validation")
        snap = m.snapshot()
        assert snap["requests"]["byHook"] == {"patient-view": 2}
        assert snap["cards"] == {"total": 3, "byIndicator": {"critical": 1, "warning": 0, "info": 2}}
        assert snap["errors"]["byType"] == {"validation": 1}

    def test_reset(self):
        m = ServiceMetrics()
        m.record_error("internal")
        m.reset()
        assert m.snapshot()["errors"]["total"] == 0
