"""
DetectionPolicy 校验 + get_detection_policy() 从 settings 读取配置。

用 pytest-django 的 settings fixture，不需要数据库。
"""
import pytest
from datetime import timedelta

from integrity.engine.detector import DEFAULT_POLICY, DetectionPolicy, DuplicateDetector
from integrity.policy import get_checker, get_detection_policy


class TestDetectionPolicy:

    def test_defaults(self):
        assert DEFAULT_POLICY.first_name_weight == 0.3
        assert DEFAULT_POLICY.last_name_weight == 0.5
        assert DEFAULT_POLICY.mrn_weight == 0.2
        assert DEFAULT_POLICY.similarity_threshold == 0.7
        assert DEFAULT_POLICY.candidate_window == 100
        assert DEFAULT_POLICY.order_window == timedelta(days=30)

    @pytest.mark.parametrize('kwargs', [
        {'first_name_weight': 0.5},                                   # 和为 1.2
        {'first_name_weight': -0.1, 'last_name_weight': 0.9},
        {'similarity_threshold': 1.5},
        {'similarity_threshold': -0.1},
        {'candidate_window': 0},
        {'order_window': timedelta(0)},
        {'mrn_prefix_length': 0},
    ])
    def test_invalid_policy_rejected(self, kwargs):
        with pytest.raises(ValueError):
            DetectionPolicy(**kwargs)

    def test_detector_defaults_to_default_policy(self):
        assert DuplicateDetector().policy == DEFAULT_POLICY


class TestGetDetectionPolicy:

    def test_reads_settings(self, settings):
        settings.INTEGRITY_DETECTION = {
            'FIRST_NAME_WEIGHT': 0.2,
            'LAST_NAME_WEIGHT': 0.6,
            'MRN_WEIGHT': 0.2,
            'SIMILARITY_THRESHOLD': 0.8,
            'CANDIDATE_WINDOW': 250,
            'ORDER_WINDOW_DAYS': 14,
            'MRN_PREFIX_LENGTH': 4,
        }

        policy = get_detection_policy()

        assert policy.first_name_weight == 0.2
        assert policy.last_name_weight == 0.6
        assert policy.similarity_threshold == 0.8
        assert policy.candidate_window == 250
        assert policy.order_window == timedelta(days=14)
        assert policy.mrn_prefix_length == 4

    def test_missing_keys_fall_back_to_defaults(self, settings):
        settings.INTEGRITY_DETECTION = {'SIMILARITY_THRESHOLD': 0.9}

        policy = get_detection_policy()

        assert policy.similarity_threshold == 0.9
        assert policy.candidate_window == DEFAULT_POLICY.candidate_window
        assert policy.order_window == DEFAULT_POLICY.order_window

    def test_missing_setting_uses_defaults(self, settings):
        del settings.INTEGRITY_DETECTION
        assert get_detection_policy() == DEFAULT_POLICY

    def test_invalid_weights_raise(self, settings):
        settings.INTEGRITY_DETECTION = {'FIRST_NAME_WEIGHT': 0.9}
        with pytest.raises(ValueError):
            get_detection_policy()

    def test_checker_uses_configured_policy(self, settings):
        settings.INTEGRITY_DETECTION = {'CANDIDATE_WINDOW': 10}
        assert get_checker().detector.policy.candidate_window == 10
