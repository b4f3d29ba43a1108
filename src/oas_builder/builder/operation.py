"""Operation Object assembly for one (action, verb, route)."""

import copy
from typing import Any

from oas_builder.catalog.base import ActionDescriptor, HeaderDescriptor, InputDescriptor

from .classifier import classify
from .components import ComponentRegistry
from .schema import DEFAULT_TYPE, STRIPPED_FIELDS, build_schema, infer_type

WRITE_VERBS = ("post", "put", "patch")
MEDIA_TYPES = ["application/json"]
# Parameter Object fields, kept out of the parameter's Schema Object.
PARAMETER_OBJECT_FIELDS = ("in", "style", "explode", "allowEmptyValue", "required", "description", "example", "schema")


def split_inputs(action: ActionDescriptor, verb: str, route: str) -> tuple[list[str], list[str]]:
    """Divide action inputs into (body_params, params) for a verb and route."""
    body_params = []
    params = []
    for name, descriptor in action.inputs.items():
        if verb in WRITE_VERBS and classify(name, descriptor, action.location, route) is None:
            body_params.append(name)
        else:
            params.append(name)
    return body_params, params


class OperationAssembler:
    """Builds Operation Objects, sharing components through ``registry``."""

    def __init__(
        self,
        registry: ComponentRegistry,
        security: list[dict[str, Any]],
        group_by_version_tag: bool = False,
    ):
        self.registry = registry
        self.security = security
        self.group_by_version_tag = group_by_version_tag

    def assemble(self, action: ActionDescriptor, verb: str, route: str) -> dict[str, Any]:
        operation: dict[str, Any] = {}

        tags = []
        if self.group_by_version_tag:
            tags.append(str(action.version))
        tags.extend(action.tags)
        if tags:
            operation["tags"] = tags

        operation["operationId"] = action.operation_id

        body_params, params = split_inputs(action, verb, route)
        request_body = self._request_body(action, body_params)
        parameters = self._parameters(action, params, route)
        parameters.extend(self._header_parameters(action))

        if request_body:
            operation["requestBody"] = request_body
        if parameters:
            operation["parameters"] = parameters
        operation["responses"] = self._responses(action)

        if action.deprecated is not None:
            operation["deprecated"] = action.deprecated

        operation["security"] = copy.deepcopy(self.security)
        return operation

    # -- request body ---------------------------------------------------------

    def _request_body(self, action: ActionDescriptor, body_params: list[str]) -> dict[str, str] | None:
        if not body_params:
            return None

        name = action.operation_id
        ref = self.registry.resolve("requestBodies", name)
        if ref:
            return ref

        media_type: dict[str, Any] = {}
        schema = build_schema(action.inputs, whitelist=body_params, body=True)
        if schema is not None:
            media_type["schema"] = {"type": "object", **schema}

        request_body = {
            "content": {mt: copy.deepcopy(media_type) for mt in MEDIA_TYPES},
            "required": any(action.inputs[p].required for p in body_params),
        }
        return self.registry.resolve("requestBodies", name, request_body)

    # -- parameters -----------------------------------------------------------

    def _parameters(self, action: ActionDescriptor, params: list[str], route: str) -> list[dict[str, Any]]:
        return [
            self._parameter(action, name, action.inputs[name], route)
            for name in params
        ]

    def _parameter(
        self, action: ActionDescriptor, name: str, descriptor: InputDescriptor, route: str
    ) -> dict[str, str]:
        component_name = f"{action.operation_id}_{name}"
        ref = self.registry.resolve("parameters", component_name)
        if ref:
            return ref

        location = classify(name, descriptor, action.location, route) or "query"
        parameter: dict[str, Any] = {"name": name, "in": location}

        if descriptor.description is not None:
            parameter["description"] = descriptor.description
        if descriptor.required is not None:
            parameter["required"] = descriptor.required
        if location == "path":
            parameter["required"] = True
        if location == "query" and descriptor.allow_empty_value is not None:
            parameter["allowEmptyValue"] = descriptor.allow_empty_value

        if descriptor.nested is not None:
            schema = build_schema(descriptor.nested)
            if schema is not None:
                parameter["schema"] = {**schema, "type": infer_type(schema)}
        else:
            parameter["schema"] = _scalar_schema(descriptor)

        for key, value in (("style", descriptor.style), ("explode", descriptor.explode), ("example", descriptor.example)):
            if value is not None:
                parameter[key] = copy.deepcopy(value)

        return self.registry.resolve("parameters", component_name, parameter)

    def _header_parameters(self, action: ActionDescriptor) -> list[dict[str, Any]]:
        if not action.headers:
            return []
        return [
            {"name": name, "in": "header", **_header_object(header)}
            for name, header in action.headers.items()
        ]

    # -- responses ------------------------------------------------------------

    def _responses(self, action: ActionDescriptor) -> dict[str, Any]:
        # OpenAPI requires at least one response.
        responses: dict[str, Any] = {"200": {"description": "OK"}}
        for status, response in (action.response_schemas or {}).items():
            responses[str(status)] = copy.deepcopy(response)

        ok = responses.get("200")
        if isinstance(ok, dict) and "content" not in ok and action.output_example:
            ok["content"] = {
                "application/json": {
                    "examples": {"default": {"value": copy.deepcopy(action.output_example)}}
                }
            }
        return responses


def _scalar_schema(descriptor: InputDescriptor) -> dict[str, Any]:
    """Schema Object of a parameter, keeping declared keywords such as ``format``."""
    schema: dict[str, Any] = {}
    for key, value in descriptor.declaration().items():
        if key in PARAMETER_OBJECT_FIELDS or key in STRIPPED_FIELDS:
            continue
        if key == "default" and callable(value):
            continue
        schema[key] = copy.deepcopy(value)
    schema["type"] = descriptor.type or DEFAULT_TYPE
    if schema["type"] != "array":
        return schema

    items = schema.get("items") or {}
    if "schema" in items:
        item_schema = build_schema(items["schema"], body=True)
        schema["items"] = {"type": "object", **item_schema} if item_schema else {"type": DEFAULT_TYPE}
    elif not items:
        schema["items"] = {"type": DEFAULT_TYPE}
    return schema


def _header_object(header: HeaderDescriptor) -> dict[str, Any]:
    """Header Object fields, with ``style`` and ``required`` defaulted."""
    header_object: dict[str, Any] = {}
    if header.description is not None:
        header_object["description"] = header.description
    if header.value_schema is not None:
        header_object["schema"] = copy.deepcopy(header.value_schema)
    if header.explode is not None:
        header_object["explode"] = header.explode
    header_object["style"] = header.style or "simple"
    if header.example is not None:
        header_object["example"] = copy.deepcopy(header.example)
    header_object["required"] = bool(header.required)
    return header_object
