"""
Example: HMM-style chain model.

Hidden labels L0--L1--L2 linked by a transition template, each label
aligned with an observed token by an emission template. Both templates
are dot-product families whose weights live in the model's WeightsSet.
"""

import numpy as np

from tfactor import (
    Aligned,
    AlignedPattern,
    CategoricalDomain,
    CategoricalVariable,
    Chain,
    ChainPattern,
    DiffList,
    DotFamily,
    Parameters,
    Template,
    TemplateModel,
)


class Label(CategoricalVariable):
    pass


class Token(CategoricalVariable):
    pass


class HMM(TemplateModel, Parameters):
    def __init__(self, labels: CategoricalDomain, vocab: CategoricalDomain, alignment: Aligned):
        super().__init__()
        n, v = labels.size(), vocab.size()
        transition = self.new_weights("transition", np.log(np.array([[0.8, 0.2], [0.3, 0.7]])))
        emission = self.new_weights("emission", np.zeros((n, v)))
        self.add_template(Template(DotFamily("transition", 2, transition), ChainPattern(Label).transition()))
        self.add_template(Template(DotFamily("emission", 2, emission), AlignedPattern(alignment, Label, Token).pair()))


def main():
    label_domain = CategoricalDomain(["N", "V"])
    vocab = CategoricalDomain(["dogs", "bark", "loudly"])
    label_domain.freeze()

    words = ["dogs", "bark", "loudly"]
    gold = ["N", "V", "N"]

    tokens = [Token(vocab, w) for w in words]
    labels = [Label(label_domain, "N", target=g) for g in gold]
    Chain(labels)
    alignment = Aligned(zip(labels, tokens))

    model = HMM(label_domain, vocab, alignment)
    emission = model.parameters.by_name("emission")
    emission.value()[label_domain.index("N"), vocab.index("dogs")] = 1.0
    emission.value()[label_domain.index("V"), vocab.index("bark")] = 1.0

    print("Factors touching the middle label:")
    for f in model.factors(labels[1]):
        print(f"  {f}  score={f.current_score():.4f}")

    print(f"\nTotal score (all labels N) = {model.current_score(labels):.4f}")

    # Propose a change and evaluate it, Metropolis-Hastings style
    diff = DiffList()
    labels[1].set_value("V", diff)
    delta = diff.score_and_undo(model)
    print(f"Score change for L1 := V: {delta:+.4f}")
    if delta > 0:
        diff.redo_all()

    print("\nFinal labels:", [l.category_value for l in labels])
    print("Matches gold:", [l.value_is_target() for l in labels])


if __name__ == "__main__":
    main()
