"""``create-component``, ``delete-component``, ``add-action`` and ``add-property``."""

from __future__ import annotations

from yala.commands.checks import required
from yala.config import Config
from yala.prompts import Prompter
from yala.registry.lifecycle import (
    ComponentManager,
    check_action_name,
    check_component_available,
    check_component_name,
    check_property_name,
    instance_id,
    qualified_component_name,
)
from yala.registry.models import ActionEntry, ComponentKind, FieldType, PropertyEntry
from yala.utils import console, print_error, print_success, print_warning

SIMPLE_PAYLOAD = "Simple Object"
ADVANCED_PAYLOAD = "Advanced (list or nested object)"


async def create_component(config: Config, prompter: Prompter) -> None:
    manager = ComponentManager.for_config(config)
    instance = instance_id(manager.load())

    kind = ComponentKind(
        prompter.select(
            "What type of component do you want to create?",
            [kind.value for kind in ComponentKind],
        )
    )

    def _validate(short_name: str) -> None:
        check_component_name(short_name)
        check_component_available(qualified_component_name(instance, short_name), manager.paths)

    short_name = prompter.text(
        f"What would you like to name your new component? x-{instance}-", validate=_validate
    )
    name = qualified_component_name(instance, short_name)

    label = description = ""
    if kind is ComponentKind.DEPLOYED:
        label = prompter.text("What do you want your component to be labeled in UI Builder?")
        description = prompter.text(
            "Give a brief description of your component:", validate=required
        )

    manager.create(name, kind, label, description)
    print_success(f"\n🎉 New component {name} created! 🎉\n")


async def delete_component(config: Config, prompter: Prompter) -> None:
    manager = ComponentManager.for_config(config)
    component = prompter.select("Select a component to delete", manager.component_names())

    if not prompter.confirm(f"Are you sure that you want to delete {component}?"):
        print_error("Delete aborted\n")
        return

    with console.status("[blue]Deleting component[/blue]"):
        manager.delete(component)

    print_success("Component successfully deleted\n")
    print_warning(
        "References to your component have been removed from src/index.js, "
        "example/element.js, and now-ui.json.\n"
        "Make sure to clean up other references throughout your project if there are any."
    )


def _prompt_payload(prompter: Prompter, action_name: str) -> dict[str, str]:
    payload_type = prompter.select("Payload type", [SIMPLE_PAYLOAD, ADVANCED_PAYLOAD])
    payload: dict[str, str] = {}
    if payload_type == ADVANCED_PAYLOAD:
        print_warning(
            f"\nDefine the advanced payload for {action_name} in your project's "
            "'now-ui.json' file"
        )
        return payload

    console.print(f"\nDefine payload for {action_name}")
    while True:
        key = prompter.text("key", validate=required)
        payload[key] = prompter.text("value", validate=required)
        if not prompter.confirm(
            "Add another key-value pair to this action's payload?", default=True
        ):
            return payload


async def add_action(config: Config, prompter: Prompter) -> None:
    manager = ComponentManager.for_config(config)
    component = prompter.select(
        "Select a component to add an action to:", manager.component_names()
    )
    existing = manager.load().components[component].action_names()

    name = prompter.text(
        "Action name (UPPER_SNAKE_CASED):",
        validate=lambda value: check_action_name(value, existing),
    )
    action = ActionEntry(
        name=name,
        label=prompter.text("UI Builder label:", validate=required),
        description=prompter.text("Action description:", validate=required),
        payload=[_prompt_payload(prompter, name)],
    )

    with console.status("[blue]Adding action[/blue]"):
        manager.add_action(component, action)
    print_success(f"Action {action.name} successfully added\n")


async def add_property(config: Config, prompter: Prompter) -> None:
    manager = ComponentManager.for_config(config)
    component = prompter.select(
        "Select a component to add a property to:", manager.component_names()
    )
    existing = manager.load().components[component].property_names()

    prop = PropertyEntry(
        name=prompter.text(
            "Property name:", validate=lambda value: check_property_name(value, existing)
        ),
        label=prompter.text("UI Builder label:", validate=required),
        required=prompter.confirm("Property required:", default=False),
        read_only=prompter.confirm("Property read-only:", default=False),
        description=prompter.text("Property description:", validate=required),
        field_type=FieldType(
            prompter.select("Property field type:", [t.value for t in FieldType])
        ),
        default_value=prompter.text("Property default value:", default=""),
    )

    with console.status("[blue]Adding property[/blue]"):
        manager.add_property(component, prop)
    print_success(f"Property {prop.name} successfully added\n")
