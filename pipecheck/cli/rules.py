"""Rules command implementation."""

import json

from pipecheck.rules import CARDINALITY_RULES, get_connection_info, get_element_label


def _names(types) -> str:
    if types is None:
        return "any"
    return ", ".join(sorted(t.value for t in types))


def rules_command(args):
    """Print the connection rule table."""
    if args.format == "json":
        payload = {}
        for element_type, rule in CARDINALITY_RULES.items():
            info = get_connection_info(element_type)
            payload[element_type.value] = {
                "label": get_element_label(element_type),
                "inputs": info.inputs,
                "outputs": info.outputs,
                "can_be_source": rule.can_be_source,
                "can_be_sink": rule.can_be_sink,
                "allowed_sources": _names(rule.allowed_sources),
                "allowed_targets": _names(rule.allowed_targets),
            }
        print(json.dumps(payload, indent=2, ensure_ascii=False))
        return 0

    for element_type, rule in CARDINALITY_RULES.items():
        info = get_connection_info(element_type)
        print(f"{get_element_label(element_type)} ({element_type.value})")
        print(f"  inputs: {info.inputs}  outputs: {info.outputs}")
        print(f"  from: {_names(rule.allowed_sources)}")
        print(f"  to:   {_names(rule.allowed_targets)}")
    return 0
