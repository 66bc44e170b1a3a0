import pytest
from fable.environment import Environment
from fable.errors import FableError


def make_env(**values):
    env = Environment()
    for name, value in values.items():
        env.declare(name)
        env.set(name, value)
    return env


def test_declare_defaults_to_zero():
    env = Environment()
    env.declare('gold')
    assert env.get('gold') == '0'
    env.set('gold', '12')
    env.declare('gold')
    assert env.get('gold') == '0'


def test_undeclared_access_is_fatal():
    env = Environment()
    with pytest.raises(FableError) as info:
        env.get('ghost')
    assert info.value.name == 'UndeclaredVariable'
    with pytest.raises(FableError):
        env.set('ghost', '1')
    assert 'ghost' not in env


def test_interpolate_without_references_is_unchanged():
    env = Environment()
    assert env.interpolate('Nothing to see here.') == 'Nothing to see here.'
    assert env.interpolate('mail me @ home') == 'mail me @ home'


def test_interpolate_uses_maximal_names():
    env = make_env(a='1', ab='2')
    assert env.interpolate('@a and @ab') == '1 and 2'
    assert env.interpolate('@ab-@a=@a') == '2-1=1'


def test_interpolate_stops_at_boundaries():
    env = make_env(who='Ada')
    assert env.interpolate('Hi @who!') == 'Hi Ada!'
    assert env.interpolate('(@who)') == '(Ada)'
    assert env.interpolate('[@who]:@who.') == '[Ada]:Ada.'


def test_interpolate_does_not_rescan_values():
    env = make_env(a='@b', b='x')
    assert env.interpolate('@a') == '@b'


def test_interpolate_is_all_or_nothing():
    env = make_env(known='1')
    with pytest.raises(FableError) as info:
        env.interpolate('@known @unknown')
    assert info.value.name == 'UndeclaredVariable'
    assert 'unknown' in str(info.value)


def test_references_in_order():
    env = Environment()
    assert env.references('@b @a @b') == ['b', 'a']


def test_comma_and_star_belong_to_the_name():
    env = make_env(a='1')
    for text, name in (('@a, then', 'a,'), ('@a*2', 'a*2')):
        with pytest.raises(FableError) as info:
            env.interpolate(text)
        assert info.value.name == 'UndeclaredVariable'
        assert f'variable {name} is missing' in str(info.value)
