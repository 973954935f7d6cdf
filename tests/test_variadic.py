import unittest

from namebind import Container


class TestVariadicInjection(unittest.TestCase):
    cont: Container

    def setUp(self):
        self.cont = Container()

    def test_instantiate_ignores_inherited_variadic_args_and_kwargs(self):
        class Base:
            def __init__(self, value, *args, **kwargs):
                self.value = value
                self.args = args
                self.kwargs = kwargs

        class Derived(Base):
            ...
            # No explicit __init__; inherits Base.__init__ with *args/**kwargs

        self.cont.value("value", 7)

        child = self.cont.instantiate(Derived)
        assert isinstance(child, Derived)
        assert child.value == 7
        assert child.args == ()
        assert child.kwargs == {}

    def test_invoke_leaves_keyword_only_defaults_alone(self):
        def connect(host, *, timeout=5):
            return host, timeout

        self.cont.value("host", "db.local").value("timeout", 99)

        assert self.cont.invoke(connect) == ("db.local", 5)
