import pytest
from fable.ast import (
    Assign, BlankOutput, Choice, Clear, Comment, Conditional, Empty, Goto,
    Input, Invalid, LabelDecl, Pause, Print,
)
from fable.errors import FableError
from fable.parser import parse_line, parse_story, split_branch, split_exact


def test_split_exact_two_fields():
    assert split_exact('@gold=10', '=', 0) == ('@gold', '10')


def test_split_exact_rejects_extra_fields():
    with pytest.raises(FableError) as info:
        split_exact('@a=b=c', '=', 4)
    assert info.value.name == 'MalformedToken'
    assert 'line 5' in str(info.value)
    assert "'='" in str(info.value)


def test_split_branch_counts_fields():
    assert split_branch('!1==1:#a', ':', 0) == (2, ['!1==1', '#a', ''])
    assert split_branch('!1==1:#a:#b', ':', 0) == (3, ['!1==1', '#a', '#b'])
    with pytest.raises(FableError):
        split_branch('!1==1', ':', 0)
    with pytest.raises(FableError):
        split_branch('!1==1:#a:#b:#c', ':', 0)


def test_simple_markers():
    assert isinstance(parse_line('', 0), Empty)
    assert isinstance(parse_line('* note', 0), Comment)
    assert isinstance(parse_line('|', 0), BlankOutput)
    assert isinstance(parse_line('~', 0), Pause)
    assert isinstance(parse_line('`', 0), Clear)
    assert parse_line(':start', 3) == LabelDecl(3, ':start', 'start')
    assert parse_line('#start', 1) == Goto(1, '#start', 'start')
    assert parse_line('Once upon a time', 0) == Print(0, 'Once upon a time', 'Once upon a time')


def test_assignment_and_prose_fallback():
    assert parse_line('@gold=2+3', 0) == Assign(0, '@gold=2+3', 'gold', '2+3')
    node = parse_line('@ midnight the bell rang', 2)
    assert isinstance(node, Print)
    assert node.message == '@ midnight the bell rang'


def test_choice_line():
    node = parse_line('?Open the door:#door', 5)
    assert node == Choice(5, '?Open the door:#door', 'Open the door', 'door')
    bad = parse_line('?Open the door', 5)
    assert isinstance(bad, Invalid)
    assert bad.error == 'MalformedToken'


def test_input_line():
    node = parse_line('^i How many coins?:@coins', 0)
    assert isinstance(node, Input)
    assert node.mode == 'i'
    assert node.prompt == 'How many coins?'
    assert node.variable == 'coins'
    assert parse_line('^q Huh?:@x', 0).mode == 'q'


def test_conditional_branches():
    node = parse_line('!@hp<=0:#dead:"Still alive"', 7)
    assert isinstance(node, Conditional)
    assert node.condition == '@hp<=0'
    assert node.then_branch == Goto(7, node.text, 'dead')
    assert node.else_branch == Print(7, node.text, 'Still alive')

    node = parse_line('!@hp>0:@hp=@hp-1', 0)
    assert node.then_branch == Assign(0, node.text, 'hp', '@hp-1')
    assert node.else_branch is None


def test_conditional_errors_are_deferred():
    node = parse_line('!1==1:"no closing quote', 0)
    assert isinstance(node, Conditional)
    assert isinstance(node.then_branch, Invalid)
    assert node.then_branch.error == 'UnterminatedQuote'

    node = parse_line('!1==1:@x', 0)
    assert node.then_branch.error == 'MalformedToken'

    assert isinstance(parse_line('!1==1', 0), Invalid)


def test_parse_story_indexes_lines():
    story = parse_story('Hello\r\n\r\n:end\n#end\n')
    assert len(story) == 4
    assert [n.index for n in story.lines] == [0, 1, 2, 3]
    assert isinstance(story.lines[1], Empty)
    assert story.lines[2].name == 'end'


def test_parse_story_splits_on_newlines_only():
    story = parse_story('Intro\u2028still intro\x0cpage\n:end\r\nlast')
    assert [n.text for n in story.lines] == ['Intro\u2028still intro\x0cpage', ':end', 'last']
    assert story.lines[1] == LabelDecl(1, ':end', 'end')


def test_parse_story_trailing_newline():
    assert len(parse_story('a\nb\n')) == 2
    assert len(parse_story('a\nb\n\n')) == 3
    assert len(parse_story('')) == 0
