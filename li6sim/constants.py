"""Physical constants, unit conversions and nuclear masses (MeV)."""

import math

M0 = 931.494102  # atomic mass unit in MeV
M02 = M0 * M0
C = 30.0  # speed of light in cm/ns
C2 = C * C
VFACT = C / math.sqrt(M0)  # velocity (cm/ns) = VFACT * sqrt(2 E(MeV) / A(amu))
VFACT2 = VFACT * VFACT
PI = math.acos(-1.0)
TWOPI = 2.0 * PI
DEG_TO_RAD = PI / 180.0
RAD_TO_DEG = 180.0 / PI

# Mass excesses (MeV), AME2016
EXCESS_N = 8.07132
EXCESS_P = 7.28897
EXCESS_D = 13.13572
EXCESS_T = 14.9498
EXCESS_3HE = 14.93121
EXCESS_ALPHA = 2.42491
EXCESS_5HE = 11.2312
EXCESS_6HE = 17.5920
EXCESS_8HE = 31.6096
EXCESS_5LI = 11.678886
EXCESS_6LI = 14.0868
EXCESS_7LI = 14.9071
EXCESS_8LI = 20.9458
EXCESS_9LI = 24.9549
EXCESS_6BE = 18.375033
EXCESS_7BE = 15.768999
EXCESS_8BE = 4.9416
EXCESS_9BE = 11.3484
EXCESS_10BE = 12.6074
EXCESS_11BE = 20.1771
EXCESS_8B = 22.9215
EXCESS_9B = 12.416488
EXCESS_10B = 12.0506
EXCESS_11B = 8.6677
EXCESS_9C = 28.910972
EXCESS_10C = 15.698672
EXCESS_11C = 10.649396
EXCESS_12C = 0.0
EXCESS_13C = 3.12500888
EXCESS_14C = 3.019892
EXCESS_11N = 24.303559
EXCESS_12N = 17.338068
EXCESS_13N = 5.345481
EXCESS_14N = 2.863416
EXCESS_15N = 0.101438
EXCESS_13O = 23.115432
EXCESS_14O = 8.007781
EXCESS_15O = 2.855605
EXCESS_16O = -4.737001
EXCESS_17O = -0.808763
EXCESS_14F = 31.964402
EXCESS_15F = 16.566751
EXCESS_17F = 1.951702
EXCESS_18F = 0.873113
EXCESS_17NE = 16.500447
EXCESS_18NE = 5.317614

# Total masses (MeV / c^2)
MASS_N = M0 + EXCESS_N
MASS_P = M0 + EXCESS_P
MASS_D = 2.0 * M0 + EXCESS_D
MASS_T = 3.0 * M0 + EXCESS_T
MASS_3HE = 3.0 * M0 + EXCESS_3HE
MASS_ALPHA = 4.0 * M0 + EXCESS_ALPHA
MASS_5HE = 5.0 * M0 + EXCESS_5HE
MASS_6HE = 6.0 * M0 + EXCESS_6HE
MASS_8HE = 8.0 * M0 + EXCESS_8HE
MASS_5LI = 5.0 * M0 + EXCESS_5LI
MASS_6LI = 6.0 * M0 + EXCESS_6LI
MASS_7LI = 7.0 * M0 + EXCESS_7LI
MASS_8LI = 8.0 * M0 + EXCESS_8LI
MASS_9LI = 9.0 * M0 + EXCESS_6LI
MASS_6BE = 6.0 * M0 + EXCESS_6BE
MASS_7BE = 7.0 * M0 + EXCESS_7BE
MASS_8BE = 8.0 * M0 + EXCESS_8BE
MASS_9BE = 9.0 * M0 + EXCESS_9BE
MASS_10BE = 10.0 * M0 + EXCESS_10BE
MASS_11BE = 11.0 * M0 + EXCESS_11BE
MASS_8B = 8.0 * M0 + EXCESS_8B
MASS_9B = 9.0 * M0 + EXCESS_9B
MASS_10B = 10.0 * M0 + EXCESS_10B
MASS_11B = 11.0 * M0 + EXCESS_11B
MASS_9C = 9.0 * M0 + EXCESS_9C
MASS_10C = 10.0 * M0 + EXCESS_10C
MASS_11C = 11.0 * M0 + EXCESS_11C
MASS_12C = 12.0 * M0 + EXCESS_12C
MASS_13C = 13.0 * M0 + EXCESS_13C
MASS_14C = 14.0 * M0 + EXCESS_14C
MASS_11N = 11.0 * M0 + EXCESS_11N
MASS_12N = 12.0 * M0 + EXCESS_12N
MASS_13N = 13.0 * M0 + EXCESS_13N
MASS_14N = 14.0 * M0 + EXCESS_14N
MASS_15N = 15.0 * M0 + EXCESS_15N
MASS_13O = 13.0 * M0 + EXCESS_13O
MASS_14O = 14.0 * M0 + EXCESS_14O
MASS_15O = 15.0 * M0 + EXCESS_15O
MASS_16O = 16.0 * M0 + EXCESS_16O
MASS_17O = 17.0 * M0 + EXCESS_17O
MASS_14F = 14.0 * M0 + EXCESS_14F
MASS_15F = 15.0 * M0 + EXCESS_15F
MASS_17F = 17.0 * M0 + EXCESS_17F
MASS_18F = 18.0 * M0 + EXCESS_18F
MASS_17NE = 17.0 * M0 + EXCESS_17NE
MASS_18NE = 18.0 * M0 + EXCESS_18NE