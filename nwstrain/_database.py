"""
Material parameter database.

params : end member compounds
    C11, C12, C44 : elastic constants [GPa]
    E14zb : zinc blende piezoelectric constant [C/m^2]
    E31wz, E33wz, E15wz : (optional) native wurtzite piezoelectric constants [C/m^2].
        If missing they are derived from E14zb in the quasi-cubic approximation.
    alc : cubic lattice constant [A]
    alc_wz : wurtzite lattice constants a, c [A]
    kappar : relative dielectric constant
    Psp : spontaneous polarization [C/m^2]

alloys : alloy records, composition x interpolates linearly from end member 'A' (x=0)
    to end member 'B' (x=1)
"""

params = {
    'GaAs' : {
        'C11' : 122.1,
        'C12' : 56.6,
        'C44' : 60.0,
        'E14zb' : -0.2381,
        'alc' : 5.6532,
        'alc_wz' : [3.994, 6.586],
        'kappar' : 12.9,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'Vurgaftman; E14 Beya-Wakata et al., PRB 84, 195207 (2011)',
    },
    'AlAs' : {
        'C11' : 125.0,
        'C12' : 53.4,
        'C44' : 54.2,
        'E14zb' : -0.048,
        'alc' : 5.6611,
        'alc_wz' : [4.002, 6.582],
        'kappar' : 10.06,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'Vurgaftman; E14 Beya-Wakata et al., PRB 84, 195207 (2011)',
    },
    'InAs' : {
        'C11' : 83.29,
        'C12' : 45.26,
        'C44' : 39.59,
        'E14zb' : -0.115,
        'alc' : 6.0583,
        'alc_wz' : [4.311, 7.093],
        'kappar' : 15.15,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'Vurgaftman; E14 Beya-Wakata et al., PRB 84, 195207 (2011)',
    },
    # end members of the (Al,In)GaAs alloys, with native wurtzite piezoelectric constants
    'GaAs_wz' : {
        'C11' : 122.1,
        'C12' : 56.6,
        'C44' : 60.0,
        'E14zb' : -0.2656 / 6.4825 * 3.9697,
        'E31wz' : 0.1328,
        'E33wz' : -0.2656,
        'E15wz' : -0.2656 / 6.4825 * 3.9697,
        'alc' : 5.6532,
        'alc_wz' : [3.994, 6.586],
        'kappar' : 12.9,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'wurtzite piezo constants: M. Catti, ASCS2006',
    },
    'AlAs_wz' : {
        'C11' : 125.0,
        'C12' : 53.4,
        'C44' : 54.2,
        'E14zb' : -0.048,
        'E31wz' : 0.1,
        'E33wz' : -0.01,
        'E15wz' : 0.1,
        'alc' : 5.6611,
        'alc_wz' : [4.002, 6.582],
        'kappar' : 10.06,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : '',
    },
    'InAs_wz' : {
        'C11' : 83.29,
        'C12' : 45.26,
        'C44' : 39.59,
        'E14zb' : -0.115,
        'E31wz' : 0.1,
        'E33wz' : -0.03,
        'E15wz' : 0.1,
        'alc' : 6.0583,
        'alc_wz' : [4.311, 7.093],
        'kappar' : 15.15,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : '',
    },
    # artificial end members, lattice constant 5*(1+x)
    'Test0' : {
        'C11' : 1200.0,
        'C12' : 300.0,
        'C44' : 500.0,
        'E14zb' : -0.08,
        'E31wz' : 0.05,
        'E33wz' : -0.02,
        'alc' : 5.0,
        'alc_wz' : [5.0, 5.0],
        'kappar' : 10.0,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'test material',
    },
    'Test1' : {
        'C11' : 1200.0,
        'C12' : 300.0,
        'C44' : 500.0,
        'E14zb' : -0.08,
        'E31wz' : 0.05,
        'E33wz' : -0.02,
        'alc' : 10.0,
        'alc_wz' : [10.0, 10.0],
        'kappar' : 10.0,
        'Psp' : [0.0, 0.0, 0.0],
        'note' : 'test material',
    },
}

alloys = {
    'GaAs' : {
        'A' : 'GaAs',
        'B' : 'GaAs',
        'lattice_rule' : 'symmetry',
        'label' : 'GaAs',
    },
    'AlInAs' : {
        'A' : 'InAs',
        'B' : 'AlAs',
        'lattice_rule' : 'symmetry',
        'label' : 'Al_{x:g}In_{y:g}As',
    },
    'AlGaAs' : {
        'A' : 'GaAs_wz',
        'B' : 'AlAs_wz',
        'lattice_rule' : 'symmetry',
        'label' : 'Al_{x:g}Ga_{y:g}As',
    },
    'InGaAs' : {
        'A' : 'GaAs_wz',
        'B' : 'InAs_wz',
        'lattice_rule' : 'symmetry',
        'label' : 'In_{x:g}Ga_{y:g}As',
    },
    'Test' : {
        'A' : 'Test0',
        'B' : 'Test1',
        'lattice_rule' : 'isotropic',
        'label' : 'Test({x:g})',
    },
}
