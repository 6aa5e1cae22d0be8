"""Fixed taxonomy of fields and timeline topics shipped with the wiki."""

from __future__ import annotations

from dataclasses import dataclass, field

from pydantic import BaseModel, Field


class TaxonomyField(BaseModel):
    id: str
    slug: str
    name: str
    description: str = ""
    color: str | None = None
    # False keeps a field off the sector wheel and out of the lanes
    sector_eligible: bool = True


class TaxonomyTopic(BaseModel):
    id: str
    field_id: str
    year: str
    title: str
    slug: str
    summary: str = ""
    tags: list[str] = Field(default_factory=list)


@dataclass(frozen=True)
class Taxonomy:
    fields: list[TaxonomyField] = field(default_factory=list)
    topics: list[TaxonomyTopic] = field(default_factory=list)

    @property
    def group_order(self) -> list[str]:
        """Declared order of the groups that get a lane and a sector."""
        return [f.id for f in self.fields if f.sector_eligible]


# Concept links that match no existing node are promoted into this field
PROMOTION_FIELD_ID = "mathematical-physics"

FIELDS: list[TaxonomyField] = [
    TaxonomyField(
        id="classical",
        slug="classical-mechanics",
        name="Classical Mechanics",
        description="The study of the motion of bodies under the action of forces.",
        color="from-blue-500 to-cyan-400",
    ),
    TaxonomyField(
        id="electrodynamics",
        slug="electrodynamics",
        name="Electrodynamics",
        description="The branch of physics which deals with rapidly changing electric and magnetic fields.",
        color="from-yellow-500 to-orange-400",
    ),
    TaxonomyField(
        id="statistical",
        slug="statistical-mechanics",
        name="Statistical Mechanics",
        description=(
            "A branch of physics that applies probability theory to study the "
            "average behavior of a mechanical system."
        ),
        color="from-green-500 to-emerald-400",
    ),
    TaxonomyField(
        id="quantum",
        slug="quantum-mechanics",
        name="Quantum Mechanics",
        description=(
            "A fundamental theory in physics that provides a description of the physical "
            "properties of nature at the scale of atoms and subatomic particles."
        ),
        color="from-purple-500 to-pink-400",
    ),
    TaxonomyField(
        id=PROMOTION_FIELD_ID,
        slug="mathematical-physics",
        name="Mathematical Physics",
        description="Mathematical methods and concepts shared across the fields.",
        color="from-slate-500 to-zinc-400",
    ),
]


def _topic(id: str, field_id: str, year: str, title: str, slug: str, summary: str) -> TaxonomyTopic:
    return TaxonomyTopic(id=id, field_id=field_id, year=year, title=title, slug=slug, summary=summary)


TOPICS: list[TaxonomyTopic] = [
    # Classical Mechanics
    _topic("c1", "classical", "1687", "Newton's Laws of Motion", "newtons-laws",
           "The foundation of classical mechanics describing the relationship between a body "
           "and the forces acting upon it."),
    _topic("c2", "classical", "1788", "Lagrangian Mechanics", "lagrangian-mechanics",
           "A reformulation of classical mechanics that combines conservation of momentum and energy."),
    _topic("c3", "classical", "1833", "Hamiltonian Mechanics", "hamiltonian-mechanics",
           "A theory that evolved from Lagrangian mechanics, providing a powerful framework "
           "for quantum mechanics."),
    _topic("c4", "classical", "1609", "Kepler's Laws", "keplers-laws",
           "Three scientific laws describing the motion of planets around the Sun."),
    _topic("c5", "classical", "1638", "Galilean Relativity", "galilean-relativity",
           "The principle that the laws of motion are the same in all inertial frames."),
    _topic("c6", "classical", "1905", "Special Relativity", "special-relativity",
           "Einstein's theory reconciling mechanics with electromagnetism."),
    # Quantum Mechanics
    _topic("q1", "quantum", "1900", "Planck's Quantization", "planck-quantization",
           "The discovery that energy is exchanged in discrete packets called quanta."),
    _topic("q2", "quantum", "1924", "Wave-Particle Duality", "wave-particle-duality",
           "The concept that every particle or quantum entity may be described as either a "
           "particle or a wave."),
    _topic("q3", "quantum", "1926", "Schrödinger Equation", "schrodinger-equation",
           "A linear partial differential equation that governs the wave function of a "
           "quantum-mechanical system."),
    _topic("q4", "quantum", "1927", "Heisenberg Uncertainty", "heisenberg-uncertainty",
           "A fundamental limit to the precision with which certain pairs of physical "
           "properties can be known."),
    _topic("q5", "quantum", "1964", "Bell's Theorem", "bells-theorem",
           "A theorem that demonstrates that quantum mechanics is incompatible with local "
           "hidden-variable theories."),
    _topic("q6", "quantum", "1981", "Quantum Computing Ideas", "quantum-computing",
           "Feynman proposes using quantum systems to simulate physics."),
    # Statistical Mechanics
    _topic("s1", "statistical", "1860", "Maxwell-Boltzmann Dist.", "maxwell-boltzmann",
           "Describes particle speeds in idealized gases."),
    _topic("s2", "statistical", "1872", "Boltzmann Entropy", "boltzmann-entropy",
           "The statistical definition of entropy and the H-theorem."),
    _topic("s3", "statistical", "1876", "Gibbs Phase Rule", "gibbs-phase-rule",
           "A criterion for the number of phases that can coexist in equilibrium."),
    _topic("s4", "statistical", "1905", "Brownian Motion", "brownian-motion",
           "The random motion of particles suspended in a medium."),
    _topic("s5", "statistical", "1920", "Ising Model", "ising-model",
           "A mathematical model of ferromagnetism in statistical mechanics."),
    _topic("s6", "statistical", "1940", "Fluctuation Theorem", "fluctuation-theorem",
           "Relates validity of the Second Law of Thermodynamics to the size of the system."),
    # Electrodynamics
    _topic("e1", "electrodynamics", "1785", "Coulomb's Law", "coulombs-law",
           "The law describing the electrostatic force of interaction between electrically "
           "charged particles."),
    _topic("e2", "electrodynamics", "1820", "Ampère's Force Law", "amperes-law",
           "Describes the magnetic force between two current-carrying wires."),
    _topic("e3", "electrodynamics", "1831", "Faraday's Induction", "faradays-law",
           "The principle that a changing magnetic field creates an electric field."),
    _topic("e4", "electrodynamics", "1861", "Maxwell's Equations", "maxwells-equations",
           "A set of coupled partial differential equations that form the foundation of "
           "classical electromagnetism."),
    _topic("e5", "electrodynamics", "1895", "Lorentz Force", "lorentz-force",
           "The force exerted on a charged particle moving through electric and magnetic fields."),
    _topic("e6", "electrodynamics", "1948", "Quantum Electrodynamics", "qed",
           "The relativistic quantum field theory of electrodynamics (Feynman, Schwinger, Tomonaga)."),
]

DEFAULT_TAXONOMY = Taxonomy(fields=FIELDS, topics=TOPICS)
