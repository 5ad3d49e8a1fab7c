"""
Task subsystem.

Components:
- task_models.py: data structures (Task, Priority, TaskStatus, FilterSpec, requests)
- task_errors.py: ValidationError / StoreError hierarchy
- task_view.py: pure filter/sort engine + display helpers
- task_store.py: SQLite-backed and in-memory storage
- task_service.py: store-side rules (ids, timestamps, toggling)
- task_codec.py / task_api.py: JSON endpoints of the store
- task_client.py: async client used by the controller
- task_controller.py: cache, edit session and delete confirmation
"""
