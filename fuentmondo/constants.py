"""Constants and mappings for the Fuentmondo sanctions engine."""

# Historical team renames (resolved name -> canonical resolved name)
TEAM_REDIRECTS = {
    'huevitos bailarines f.c': 'real bailarines f.c',
    'cangrena f.c.': 'lim hijo de puta',
}

# Proper name of the cup; championships containing it pay the registration fee
CUP_NAME = 'COPA PIRAÑA'

# Captain names the archive uses when nobody was recorded
CAPTAIN_PLACEHOLDERS = {'', 'N/A'}

# Standings scoring
POINTS_WIN = 3
POINTS_DRAW = 1

# Sanction costs
COST_INFRACTION = 5
COST_SAME_CLUB_CAPTAIN = 2
COST_H2H_PLAYER = 0.5
COST_H2H_CAPTAIN = 2
COST_RIVAL_CAPTAIN = 2
COST_WORST_CAPTAIN = 1
COST_WORST_PLAYER = 1
COST_REGISTRATION_FEE = 5
COST_MISSED_FIRST_ROUND = 5

# Worst-team tiers, lowest distinct score first
WORST_TEAM_TIERS = (2, 1.5, 1)

# Ledger entry types
TYPE_REPEATED_CAPTAIN = 'Capitán Repetido'
TYPE_SAME_CLUB = '2 Jugadores + Capitán mismo club'
TYPE_H2H_PLAYER = 'Jugador Repetido H2H'
TYPE_H2H_CAPTAIN = 'Capitán Repetido H2H'
TYPE_RIVAL_CAPTAIN = 'Tengo al Capitán rival (Regular)'
TYPE_WORST_TEAM = 'Peor Equipo ({tier}º)'
TYPE_WORST_CAPTAIN = 'Peor Capitán'
TYPE_WORST_PLAYER = 'Peor Jugador'
TYPE_REGISTRATION_FEE = 'Tasa Inscripción (Acceso directo)'
TYPE_MISSED_FIRST_ROUND = 'No juega Ronda 1'
TYPE_INFRACTION = 'Infracción: {kind}'

# Infraction kinds
INFRACTION_OUT_OF_TEAM = 'Jugador Sancionado (Fuera del equipo)'
INFRACTION_NO_CAPTAIN = 'Jugador Sancionado (Sin capitanía)'
INFRACTION_HISTORICAL_OUT = 'Infracción Histórica: Alineación Sancionado'
INFRACTION_HISTORICAL_CAPTAIN = 'Infracción Histórica: Capitán Sancionado'
