"""yala -- scaffolding and deployment CLI for UI component projects.

Wraps the ServiceNow ``snc ui-component`` tooling and keeps the component
registry (``now-ui.json``), the ``src/index.js`` import barrel and the
``example/element.js`` harness in sync as components come and go.

Quick usage::

    from yala.config import Config
    from yala.registry import ComponentKind
    from yala.registry.lifecycle import ComponentManager

    config = Config(project_root=Path("my-app-components"))
    manager = ComponentManager.for_config(config)
    manager.create("x-abcd-hello-world", ComponentKind.DEPLOYED, "Hello", "Says hi")
"""

__version__ = "1.0.0"
