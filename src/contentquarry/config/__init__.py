from .config import Config, MonitoringConfig, ParserConfig, ScoringThresholds, find_config_file

__all__ = ["Config", "MonitoringConfig", "ParserConfig", "ScoringThresholds", "find_config_file"]
