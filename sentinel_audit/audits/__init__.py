from .engine import AuditEngine, pod_config_issues, run_audit

__all__ = ["AuditEngine", "pod_config_issues", "run_audit"]
