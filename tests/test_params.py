"""
RC 参数展平测试

被测模块: dabmux_ui/rc/params.py

测试类/函数清单:
    TestFormatValue                          值转换测试
        test_scalar_conversion               验证 null/bool/int/str 的字符串形式
        test_float_conversion                验证浮点数使用 JSON 文本形式
        test_array_rejected                  验证数组抛出 UnsupportedValueShapeError
        test_object_rejected                 验证对象抛出 UnsupportedValueShapeError
    TestFlattenParameters                    展平测试
        test_one_param_per_pair              验证无 label 时每个 (module, param) 恰好一项
        test_label_merge                     验证 label/shortlabel 合并为一项
        test_label_without_shortlabel        验证只有 label 时不输出 label
        test_non_string_label_not_merged     验证非字符串 label 不合并
        test_order_follows_reply             验证顺序与应答一致
        test_root_not_object                 验证根节点不是对象时报错
        test_module_not_object               验证模块不是对象时报错并带模块名
        test_nested_value_names_location     验证错误定位到 module.param
    TestUnflattenParameters                  逆展平测试
        test_split_label                     验证组合 label 在最后一个逗号处拆分
        test_round_trip_label_merge          验证 flatten(unflatten(x)) == x
"""

import json

import pytest

from dabmux_ui.models import MalformedResponseError, Param, UnsupportedValueShapeError
from dabmux_ui.rc.params import flatten_parameters, format_value, unflatten_parameters


class TestFormatValue:
    """值转换测试"""

    def test_scalar_conversion(self):
        assert format_value("m", "p", True) == "1"
        assert format_value("m", "p", False) == "0"
        assert format_value("m", "p", None) == "null"
        assert format_value("m", "p", 42) == "42"
        assert format_value("m", "p", -7) == "-7"
        assert format_value("m", "p", "x") == "x"
        assert format_value("m", "p", "") == ""

    def test_float_conversion(self):
        assert format_value("m", "p", 1.5) == "1.5"
        assert format_value("m", "p", 2.0) == "2.0"

    def test_array_rejected(self):
        with pytest.raises(UnsupportedValueShapeError) as exc:
            format_value("sub-fu", "list", [1, 2])
        assert exc.value.module == "sub-fu"
        assert exc.value.param == "list"
        assert "sub-fu.list" in str(exc.value)

    def test_object_rejected(self):
        with pytest.raises(UnsupportedValueShapeError) as exc:
            format_value("sub-fu", "nested", {"a": 1})
        assert exc.value.shape == "object"


class TestFlattenParameters:
    """展平测试"""

    def test_one_param_per_pair(self):
        tree = {
            "ensemble": {"pty": 1, "intlabel": "x"},
            "tist": {"enable": False, "offset": None},
        }

        params = flatten_parameters(tree)

        assert params == [
            Param("ensemble", "pty", "1"),
            Param("ensemble", "intlabel", "x"),
            Param("tist", "enable", "0"),
            Param("tist", "offset", "null"),
        ]

    def test_label_merge(self):
        params = flatten_parameters({"srv-fu": {"label": "Foo", "shortlabel": "F"}})

        assert params == [Param("srv-fu", "label", "Foo,F")]
        assert not [p for p in params if p.param == "shortlabel"]

    def test_label_without_shortlabel(self):
        params = flatten_parameters({"srv-fu": {"label": "Foo", "pty": 3}})

        assert params == [Param("srv-fu", "pty", "3")]

    def test_non_string_label_not_merged(self):
        params = flatten_parameters({"srv-fu": {"label": 1, "shortlabel": "F"}})

        assert params == []

    def test_order_follows_reply(self, sample_showjson):
        params = flatten_parameters(json.loads(sample_showjson))

        assert [(p.module, p.param) for p in params] == [
            ("srv-fu", "label"),
            ("srv-fu", "pty"),
            ("srv-fu", "pty_sd"),
            ("sub-fu", "bitrate"),
            ("sub-fu", "enable"),
            ("sub-fu", "description"),
            ("tist", "offset"),
            ("tist", "timestamp"),
        ]
        assert params[0].value == "Radio FOO,FOO"
        assert params[4].value == "1"
        assert params[6].value == "0.5"

    def test_root_not_object(self):
        with pytest.raises(MalformedResponseError):
            flatten_parameters(["srv-fu"])

    def test_module_not_object(self):
        with pytest.raises(MalformedResponseError) as exc:
            flatten_parameters({"ok": {}, "broken": "value"})

        assert "broken" in exc.value.detail
        assert exc.value.details == {"module": "broken"}

    def test_nested_value_names_location(self):
        with pytest.raises(UnsupportedValueShapeError) as exc:
            flatten_parameters({"srv-fu": {"pty": 1, "children": [1]}})

        assert (exc.value.module, exc.value.param) == ("srv-fu", "children")


class TestUnflattenParameters:
    """逆展平测试"""

    def test_split_label(self):
        tree = unflatten_parameters(
            [Param("srv-fu", "label", "A,B,C"), Param("srv-fu", "pty", "1")]
        )

        assert tree == {"srv-fu": {"label": "A,B", "shortlabel": "C", "pty": "1"}}
        assert list(tree["srv-fu"]) == ["label", "shortlabel", "pty"]

    def test_round_trip_label_merge(self):
        params = [
            Param("srv-fu", "label", "Radio FOO,FOO"),
            Param("srv-fu", "pty", "10"),
            Param("srv-bar", "label", "Bar,B"),
            Param("ensemble", "intlabel", "x"),
        ]

        assert flatten_parameters(unflatten_parameters(params)) == params
