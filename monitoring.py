"""
Logging setup, metrics and health checks for the keyword engine
"""
import logging
import os
import psutil
from typing import Dict, Any, Optional
from datetime import datetime
from threading import Lock

from config import config

# Configure logging with multiple handlers
def setup_logging(log_level: str = None, log_dir: Optional[str] = None):
    """Setup console logging, plus engine and error log files when log_dir is set"""
    log_level = (log_level or config.log_level).upper()

    detailed_formatter = logging.Formatter(
        '%(asctime)s - %(name)s - %(levelname)s - %(funcName)s:%(lineno)d - %(message)s'
    )
    simple_formatter = logging.Formatter(config.log_format)

    root_logger = logging.getLogger()
    root_logger.setLevel(getattr(logging, log_level, logging.INFO))

    # Clear existing handlers
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.INFO)
    console_handler.setFormatter(simple_formatter)
    root_logger.addHandler(console_handler)

    if log_dir:
        if not os.path.exists(log_dir):
            os.makedirs(log_dir)

        file_handler = logging.FileHandler(
            os.path.join(log_dir, 'engine.log'),
            encoding='utf-8'
        )
        file_handler.setLevel(logging.DEBUG)
        file_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(file_handler)

        error_handler = logging.FileHandler(
            os.path.join(log_dir, 'errors.log'),
            encoding='utf-8'
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(detailed_formatter)
        root_logger.addHandler(error_handler)

    return root_logger


class MetricsCollector:
    """Thread-safe counters for catalog and engine activity"""

    def __init__(self):
        self.metrics_lock = Lock()
        self.started_at = datetime.now()
        self.keywords_created = 0
        self.keywords_updated = 0
        self.keywords_deleted = 0
        self.scores_computed = 0
        self.batch_recomputes = 0
        self.skipped_ids = 0
        self.errors_count = 0

    def record_keyword_created(self):
        with self.metrics_lock:
            self.keywords_created += 1
            self.scores_computed += 1

    def record_keyword_updated(self, rescored: bool = False):
        with self.metrics_lock:
            self.keywords_updated += 1
            if rescored:
                self.scores_computed += 1

    def record_keyword_deleted(self):
        with self.metrics_lock:
            self.keywords_deleted += 1

    def record_score(self, count: int = 1):
        with self.metrics_lock:
            self.scores_computed += count

    def record_batch_recompute(self, updated: int, skipped: int):
        with self.metrics_lock:
            self.batch_recomputes += 1
            self.keywords_updated += updated
            self.skipped_ids += skipped

    def record_error(self):
        with self.metrics_lock:
            self.errors_count += 1

    def get_metrics(self) -> Dict[str, Any]:
        with self.metrics_lock:
            counters = {
                'keywords_created': self.keywords_created,
                'keywords_updated': self.keywords_updated,
                'keywords_deleted': self.keywords_deleted,
                'scores_computed': self.scores_computed,
                'batch_recomputes': self.batch_recomputes,
                'skipped_ids': self.skipped_ids,
                'errors_count': self.errors_count,
            }
        process = psutil.Process(os.getpid())
        counters['memory_mb'] = round(process.memory_info().rss / 1024 / 1024, 1)
        counters['uptime_seconds'] = round((datetime.now() - self.started_at).total_seconds(), 1)
        return counters


class HealthChecker:
    """Overall health from catalog state and process resources"""

    def __init__(self, metrics_collector: MetricsCollector, catalog=None):
        self.metrics_collector = metrics_collector
        self.catalog = catalog

    def check_health(self) -> Dict[str, Any]:
        components = {
            'catalog': self._check_catalog_health(),
            'process': self._check_process_health(),
        }
        statuses = [c['status'] for c in components.values()]
        if 'critical' in statuses:
            overall = 'critical'
        elif 'warning' in statuses:
            overall = 'warning'
        else:
            overall = 'healthy'

        return {
            'timestamp': datetime.now().isoformat(),
            'overall_status': overall,
            'components': components,
        }

    def _check_catalog_health(self) -> Dict[str, Any]:
        if self.catalog is None:
            return {'status': 'critical', 'issues': ['Catalog not initialised']}
        return {'status': 'healthy', 'keywords': self.catalog.count(), 'issues': []}

    def _check_process_health(self) -> Dict[str, Any]:
        try:
            memory = psutil.virtual_memory()
            status = 'healthy'
            issues = []
            if memory.percent > 90:
                status = 'warning'
                issues.append(f"High memory usage: {memory.percent:.1f}%")
            return {'status': status, 'memory_percent': memory.percent, 'issues': issues}
        except Exception as e:
            logging.error(f"Error checking process health: {e}")
            return {'status': 'warning', 'issues': [f"Process check failed: {e}"]}


# Initialize monitoring system
def init_monitoring(catalog=None, log_level: str = None, log_dir: Optional[str] = None):
    """Initialize logging, metrics and health checking"""
    setup_logging(log_level, log_dir)

    metrics_collector = MetricsCollector()
    health_checker = HealthChecker(metrics_collector, catalog)

    logging.info("Monitoring system initialized")

    return metrics_collector, health_checker
