from garage_booking.core.errors import CapacityConflict, StorageError, ValidationFailed

def test_validation_payload():
    exc = ValidationFailed(["Phone number is required"])
    assert exc.status_code == 422
    assert exc.to_payload() == {
        "success": False,
        "message": "Validation failed",
        "errors": ["Phone number is required"],
    }

def test_capacity_payload():
    exc = CapacityConflict(time_slot="9-10am")
    assert exc.status_code == 409
    assert exc.to_payload() == {
        "success": False,
        "message": "This time slot is already full. Please choose another one.",
    }

def test_storage_error_hides_cause():
    try:
        try:
            raise RuntimeError("password=hunter2")
        except RuntimeError as e:
            raise StorageError() from e
    except StorageError as exc:
        assert exc.status_code == 500
        assert "hunter2" not in str(exc.to_payload())
        assert isinstance(exc.__cause__, RuntimeError)
