from babyfoot.workers.tasks.session_expiry import run_session_expiry_sweep

__all__ = ["run_session_expiry_sweep"]
