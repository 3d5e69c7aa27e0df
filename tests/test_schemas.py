from todo_backend.schemas import TodoCreate, TodoRead, TodoUpdate


def test_supplied_keeps_only_present_fields():
    patch = TodoUpdate.model_validate({"priority": 2})
    assert patch.supplied() == {"priority": 2}


def test_supplied_order_and_completed_coercion():
    patch = TodoUpdate.model_validate({"priority": 1, "completed": True, "title": "t"})
    assert list(patch.supplied().items()) == [("title", "t"), ("completed", 1), ("priority", 1)]
    assert TodoUpdate.model_validate({"completed": False}).supplied() == {"completed": 0}


def test_null_fields_count_as_supplied():
    patch = TodoUpdate.model_validate({"title": None, "completed": None, "priority": None})
    assert patch.supplied() == {"title": None, "completed": 0, "priority": 0}


def test_create_defaults():
    todo = TodoCreate.model_validate({"title": "a"})
    assert todo.priority == 0


def test_read_renders_completed_as_flag():
    assert TodoRead(id=1, title="a", completed=True, priority=None).model_dump() == {
        "id": 1,
        "title": "a",
        "completed": 1,
        "priority": 0,
    }
