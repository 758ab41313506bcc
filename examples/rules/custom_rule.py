"""Write your own rule: a block rule that upper-cases its body."""

from tagweave import BlockRule, State, StateTransitionRule, TagProcessor


class ShoutRule(BlockRule):
    def process_start(self, tag, context):
        context.push_buffer()

    def process_end(self, tag, context, data):
        body = context.current_buffer_contents()
        context.pop_buffer()
        context.current_buffer().append(body.upper())


source = """
<p>Say <shout>hello <em>there</em></shout>!</p>
<script>if (a <shout) { run(); }</script>
"""

processor = TagProcessor(source)
processor.add_rule("shout", ShoutRule())
# Leave markup inside <script> alone
StateTransitionRule.paired("script", processor.default_state, State(name="script"))

print(processor.process())
