"""
工厂函数：根据 settings.INTEGRITY_DETECTION 构造 DetectionPolicy。

权重、阈值、窗口大小都是配置，不写死在算法里。
换策略只需改环境变量（见 config/settings.py），代码零改动。
"""

from datetime import timedelta

from django.conf import settings

from .engine.checker import IntegrityChecker
from .engine.detector import DEFAULT_POLICY, DetectionPolicy, DuplicateDetector


def get_detection_policy() -> DetectionPolicy:
    """
    从 settings.INTEGRITY_DETECTION 读取配置；缺省的键用 DEFAULT_POLICY 的值。

    Raises:
        ValueError: 权重之和不为 1.0、阈值越界等（由 DetectionPolicy 校验）
    """
    conf = getattr(settings, "INTEGRITY_DETECTION", {}) or {}

    order_window_days = conf.get("ORDER_WINDOW_DAYS")
    order_window = (
        timedelta(days=float(order_window_days))
        if order_window_days is not None
        else DEFAULT_POLICY.order_window
    )

    return DetectionPolicy(
        first_name_weight=float(conf.get("FIRST_NAME_WEIGHT", DEFAULT_POLICY.first_name_weight)),
        last_name_weight=float(conf.get("LAST_NAME_WEIGHT", DEFAULT_POLICY.last_name_weight)),
        mrn_weight=float(conf.get("MRN_WEIGHT", DEFAULT_POLICY.mrn_weight)),
        similarity_threshold=float(conf.get("SIMILARITY_THRESHOLD", DEFAULT_POLICY.similarity_threshold)),
        candidate_window=int(conf.get("CANDIDATE_WINDOW", DEFAULT_POLICY.candidate_window)),
        order_window=order_window,
        mrn_prefix_length=int(conf.get("MRN_PREFIX_LENGTH", DEFAULT_POLICY.mrn_prefix_length)),
    )


def get_checker() -> IntegrityChecker:
    return IntegrityChecker(detector=DuplicateDetector(get_detection_policy()))
