# unit conversion of elastic and piezoelectric constants
# GPa -> N/nm^2 and C/m^2 -> C/nm^2
tensor_scale = 1e-9

# reference lattice constant (Angstrom) used when the lattice mismatch
# is given as a lattice factor: lc = [lc_ref, lc_ref*(1+latfac)]
lc_ref = 5.0

# geometric factors relating the cubic lattice constant to the
# (111)-oriented cell
sr2 = 2**0.5
sr34 = (3/4)**0.5
