from streamdeckctl.tsbutton import ACTIVE_STYLE, INACTIVE_STYLE, TimestampButton


def test_new_button_is_inactive_with_zero_timestamp():
    button = TimestampButton(save_on_click=True)
    assert button.active is False
    assert button.timestamp == 0
    assert button.save_on_click is True


def test_activation_sets_style():
    button = TimestampButton(save_on_click=False)
    button.active = True
    assert button.active is True
    assert button.style_sheet == "background-color: red"
    assert button.style_sheet == ACTIVE_STYLE


def test_deactivation_resets_style():
    button = TimestampButton(save_on_click=False)
    button.active = True
    button.active = False
    assert button.active is False
    assert button.style_sheet == "background-color: none"
    assert button.style_sheet == INACTIVE_STYLE


def test_timestamp_is_stored():
    button = TimestampButton(save_on_click=True)
    button.timestamp = 1700000000
    assert button.timestamp == 1700000000


def test_save_on_click_flag_kept():
    assert TimestampButton(save_on_click=False).save_on_click is False