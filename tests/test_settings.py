import importlib


def test_debug_and_eager_tasks_off_unless_enabled(monkeypatch):
    monkeypatch.delenv("DJANGO_DEBUG", raising=False)
    monkeypatch.delenv("CELERY_TASK_ALWAYS_EAGER", raising=False)
    module = importlib.reload(importlib.import_module("inkwell.settings"))
    assert module.DEBUG is False
    assert module.CELERY_TASK_ALWAYS_EAGER is False

    monkeypatch.setenv("DJANGO_DEBUG", "true")
    monkeypatch.setenv("CELERY_TASK_ALWAYS_EAGER", "1")
    module = importlib.reload(module)
    assert module.DEBUG is True
    assert module.CELERY_TASK_ALWAYS_EAGER is True
