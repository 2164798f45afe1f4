from BremsLabSim.core import Particle, ParticleKind, ParticleStore


def make_particle(kind=ParticleKind.BETA, life=10):
    return Particle(x=0.0, y=0.0, vx=1.0, vy=0.0, kind=kind, life=life)


def test_add_particles_assigns_unique_ids(store):
    added = store.add_particles([make_particle() for _ in range(3)])
    added += store.add_particles([make_particle()])
    assert added == 4
    assert len(store) == 4
    assert [p.particle_id for p in store] == [0, 1, 2, 3]
    assert store.total_spawned == 4


def test_compact_removes_exhausted_particles(store):
    store.add_particles([make_particle(life=5), make_particle(life=0), make_particle(life=-1)])
    removed = store.compact()
    assert removed == 2
    assert [p.life for p in store] == [5]


def test_clear_empties_store(store):
    store.add_particles([make_particle() for _ in range(5)])
    store.clear()
    assert len(store) == 0
    assert store.num_active == 0
    assert store.total_spawned == 0


def test_count_by_kind(store):
    store.add_particles([
        make_particle(ParticleKind.BETA),
        make_particle(ParticleKind.BETA),
        make_particle(ParticleKind.BACKGROUND_PHOTON),
    ])
    counts = store.count_by_kind()
    assert counts[ParticleKind.BETA] == 2
    assert counts[ParticleKind.PHOTON] == 0
    assert counts[ParticleKind.BACKGROUND_PHOTON] == 1


def test_views_are_detached_copies(store):
    particle = make_particle(life=100)
    store.add_particles([particle])
    particle.advance()
    view = store.views()[0]

    particle.advance()
    assert view.x == 1.0
    assert view.trail == ((1.0, 0.0),)
    assert view.opacity == 0.5


def test_view_opacity_is_clamped(store):
    store.add_particles([make_particle(ParticleKind.BACKGROUND_PHOTON, life=400)])
    store.add_particles([make_particle(ParticleKind.PHOTON, life=400)])
    background, photon = store.views()
    assert background.opacity == 0.8
    assert photon.opacity == 1.0
