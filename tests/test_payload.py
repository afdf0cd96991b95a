from apidesign.design.model import (
    ActionDefinition,
    AttributeDefinition,
    Integer,
    Object,
    ResourceDefinition,
    String,
    UserTypeDefinition,
)
from apidesign.dsl.action import action, payload, payload_type_name
from apidesign.dsl.api import resource
from apidesign.dsl.attribute import member, required
from apidesign.dsl.context import BuildContext
from apidesign.dsl.errors import DesignError, ErrorKind
from apidesign.dsl.types import user_type


def _update_account() -> ActionDefinition:
    return ActionDefinition(name="Update", parent=ResourceDefinition(name="Account"))


def _register_bottle(ctx: BuildContext) -> UserTypeDefinition:
    def members():
        member(ctx, "name", String)
        member(ctx, "vintage", Integer)

    return user_type(ctx, "BottlePayload", members)


class _Typed:
    def __init__(self, att: AttributeDefinition):
        self._att = att

    def definition(self) -> AttributeDefinition:
        return self._att


def test_payload_type_name_is_camelized():
    assert payload_type_name("Update", "Account") == "UpdateAccountPayload"
    assert payload_type_name("update", "account") == "UpdateAccountPayload"
    assert payload_type_name("add_member", "team_account") == "AddMemberTeamAccountPayload"
    assert payload_type_name("bulk-create", "bottle") == "BulkCreateBottlePayload"
    assert payload_type_name("add", "wine cellar") == "AddWineCellarPayload"


def test_payload_from_callback_builds_inline_object():
    ctx = BuildContext()
    a = _update_account()

    ctx.execute(lambda: payload(ctx, lambda: member(ctx, "name")), a)

    assert ctx.errors == []
    assert a.payload.type_name == "UpdateAccountPayload"
    assert isinstance(a.payload.attribute.type, Object)
    assert a.payload.attribute.type.members["name"].type is String


def test_payload_through_full_dsl():
    ctx = BuildContext()

    def update():
        payload(ctx, lambda: member(ctx, "name"))

    resource(ctx, "Account", lambda: action(ctx, "Update", update))

    a = ctx.design.resources["Account"].actions["Update"]
    assert a.payload.type_name == "UpdateAccountPayload"


def test_payload_from_type_name_uses_registry_type():
    ctx = BuildContext()
    bottle = _register_bottle(ctx)
    a = _update_account()

    ctx.execute(lambda: payload(ctx, "BottlePayload"), a)

    assert ctx.errors == []
    assert a.payload.type_name == "UpdateAccountPayload"
    assert a.payload.attribute is bottle.attribute


def test_payload_from_attribute_is_used_as_is():
    ctx = BuildContext()
    att = AttributeDefinition(type=Object())
    a = _update_account()

    ctx.execute(lambda: payload(ctx, att), a)

    assert a.payload.attribute is att
    assert a.payload.type_name == "UpdateAccountPayload"


def test_payload_from_value_with_definition():
    ctx = BuildContext()
    att = AttributeDefinition(type=Object())
    a = _update_account()

    ctx.execute(lambda: payload(ctx, _Typed(att)), a)

    assert a.payload.attribute is att


def test_payload_from_user_type_value():
    ctx = BuildContext()
    bottle = _register_bottle(ctx)
    a = _update_account()

    ctx.execute(lambda: payload(ctx, bottle), a)

    assert a.payload.attribute is bottle.attribute
    assert a.payload.type_name == "UpdateAccountPayload"


def test_payload_type_name_with_override_leaves_registry_untouched():
    ctx = BuildContext()
    bottle = _register_bottle(ctx)
    a = _update_account()

    ctx.execute(lambda: payload(ctx, "BottlePayload", lambda: required(ctx, "name")), a)

    assert ctx.errors == []
    assert a.payload.attribute.required == ["name"]
    assert list(a.payload.attribute.type.members) == ["name", "vintage"]
    assert bottle.attribute.required == []
    assert a.payload.attribute.type is not bottle.attribute.type


def test_payload_attribute_with_override_adds_members_to_copy():
    ctx = BuildContext()
    att = AttributeDefinition(type=Object())
    a = _update_account()

    ctx.execute(lambda: payload(ctx, att, lambda: member(ctx, "extra")), a)

    assert list(a.payload.attribute.type.members) == ["extra"]
    assert att.type.members == {}


def test_payload_typed_value_with_override():
    ctx = BuildContext()
    att = AttributeDefinition(type=Object(members={"name": AttributeDefinition(type=String)}))
    a = _update_account()

    ctx.execute(lambda: payload(ctx, _Typed(att), lambda: required(ctx, "name")), a)

    assert a.payload.attribute.required == ["name"]
    assert att.required == []


def test_payload_callback_with_override_is_call_shape_error():
    ctx = BuildContext()
    a = _update_account()
    ran = []

    ctx.execute(lambda: payload(ctx, lambda: ran.append(1), lambda: ran.append(2)), a)

    assert a.payload is None
    assert ran == []
    assert [e.kind for e in ctx.errors] == [ErrorKind.CALL_SHAPE]
    assert "invalid arguments in payload call" in ctx.errors[0].message


def test_payload_too_many_arguments():
    ctx = BuildContext()
    _register_bottle(ctx)
    a = _update_account()

    ctx.execute(lambda: payload(ctx, "BottlePayload", lambda: None, lambda: None), a)

    assert a.payload is None
    assert ctx.errors[0].kind == ErrorKind.CALL_SHAPE
    assert ctx.errors[0].message == "too many arguments given to payload"


def test_payload_override_must_be_callable():
    ctx = BuildContext()
    _register_bottle(ctx)
    a = _update_account()

    ok = ctx.execute(lambda: payload(ctx, "BottlePayload", "oops"), a)

    assert ok is False
    assert a.payload is None
    assert [e.kind for e in ctx.errors] == [ErrorKind.CALL_SHAPE]
    assert "payload override must be a callable" in ctx.errors[0].message


def test_payload_unknown_type_name():
    ctx = BuildContext()
    a = _update_account()

    ctx.execute(lambda: payload(ctx, "Nonexistent"), a)

    assert a.payload is None
    assert [e.kind for e in ctx.errors] == [ErrorKind.REFERENCE]
    assert ctx.errors[0].message == 'unknown payload type "Nonexistent"'


def test_payload_invalid_source():
    ctx = BuildContext()
    a = _update_account()

    ctx.execute(lambda: payload(ctx, 42), a)

    assert a.payload is None
    assert ctx.errors[0].kind == ErrorKind.CALL_SHAPE


def test_payload_outside_action():
    ctx = BuildContext()
    assert payload(ctx, lambda: None) is None
    assert ctx.errors[0].kind == ErrorKind.CONTEXT


def test_payload_failed_callback_leaves_payload_unset():
    ctx = BuildContext()
    a = _update_account()

    def bad():
        member(ctx, "name")
        raise DesignError("no")

    ctx.execute(lambda: payload(ctx, bad), a)

    assert a.payload is None


def test_payload_second_declaration_extends_first():
    ctx = BuildContext()
    a = _update_account()

    def first():
        member(ctx, "name")
        required(ctx, "name")

    ctx.execute(lambda: payload(ctx, first), a)
    first_attribute = a.payload.attribute
    ctx.execute(lambda: payload(ctx, lambda: member(ctx, "age", Integer)), a)

    assert ctx.errors == []
    assert a.payload.type_name == "UpdateAccountPayload"
    assert list(a.payload.attribute.type.members) == ["name", "age"]
    assert a.payload.attribute.required == ["name"]
    assert list(first_attribute.type.members) == ["name"]


def test_payload_name_is_stable_across_sources_and_passes():
    names = set()
    for source in ("cb", "name", "attribute", "typed"):
        ctx = BuildContext()
        _register_bottle(ctx)
        a = _update_account()
        value = {
            "cb": lambda: None,
            "name": "BottlePayload",
            "attribute": AttributeDefinition(type=Object()),
            "typed": _Typed(AttributeDefinition(type=Object())),
        }[source]
        ctx.execute(lambda: payload(ctx, value), a)
        names.add(a.payload.type_name)
    assert names == {"UpdateAccountPayload"}
