import matplotlib.pyplot as plt
import numpy as np
import seaborn as sns
from typing import Dict, List, Optional, Tuple

from slotting.data_processing.data_transformer import DataTransformer
from slotting.models.product import Product
from slotting.models.settings import AxisConstraint, MoveTarget, ScoringWeights
from slotting.models.warehouse import WarehouseLayout
from slotting.optimization.placement_scorer import rank_cells
from slotting.utils.logger import get_logger

class WarehouseVisualizer:
    """Create visual representations of the warehouse grid"""

    def __init__(self, figsize: Tuple[int, int] = (16, 10)):
        self.figsize = figsize
        self.logger = get_logger()
        self.transformer = DataTransformer()

        self.zone_colors = {
            1: '#2ECC71',
            2: '#F1C40F',
            3: '#E67E22'
        }

    def _level_axes(self, levels: int):
        fig, axes = plt.subplots(levels, 1, figsize=self.figsize, squeeze=False)
        return fig, [ax for ax in axes[:, 0]]

    def _cell_labels(self, layout: WarehouseLayout, level: int,
                     move_targets: List[MoveTarget],
                     ideal_cell_id: Optional[str],
                     source_cell_id: Optional[str]) -> np.ndarray:
        """Annotation text per cell: zone number, ideal (I) and source (S) markers"""
        labels = np.full((layout.rows, layout.columns), '', dtype=object)
        zones = {t.cell_id: t.zone for t in move_targets}

        for cell in layout.cells:
            if cell.level != level:
                continue
            text = ''
            if cell.cell_id in zones:
                text = f"Z{zones[cell.cell_id]}"
            if cell.cell_id == ideal_cell_id:
                text = (text + ' I').strip()
            if cell.cell_id == source_cell_id:
                text = (text + ' S').strip()
            labels[cell.row, cell.column] = text
        return labels

    def visualize_warehouse(self, layout: WarehouseLayout,
                            products: Dict[str, Product],
                            move_targets: Optional[List[MoveTarget]] = None,
                            ideal_cell_id: Optional[str] = None,
                            source_cell_id: Optional[str] = None,
                            title: str = "Warehouse Occupancy",
                            save_path: Optional[str] = None) -> plt.Figure:
        """One volume heatmap per level, annotated with move zones"""
        move_targets = move_targets or []
        fig, axes = self._level_axes(layout.levels)

        for level, ax in enumerate(axes):
            grid = self.transformer.volume_grid(layout, products, level)
            labels = self._cell_labels(layout, level, move_targets, ideal_cell_id, source_cell_id)

            sns.heatmap(grid, annot=labels, fmt='', cmap='Blues',
                        vmin=0, vmax=layout.cell_capacity,
                        linewidths=0.5, linecolor='#CCCCCC',
                        cbar_kws={'label': 'Volume'},
                        ax=ax,
                        xticklabels=[c + 1 for c in range(layout.columns)],
                        yticklabels=[r + 1 for r in range(layout.rows)])

            self._outline_targets(ax, layout, level, move_targets)
            ax.set_title(f'Level {level + 1}', fontsize=12, weight='bold')
            ax.set_xlabel('Column')
            ax.set_ylabel('Row (1 = loading gates)')

        fig.suptitle(title, fontsize=16, fontweight='bold')
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            self.logger.info(f"Warehouse map saved to {save_path}")

        return fig

    def _outline_targets(self, ax, layout: WarehouseLayout, level: int, move_targets: List[MoveTarget]):
        for target in move_targets:
            cell = layout.get_cell(target.cell_id)
            if cell is None or cell.level != level:
                continue
            ax.add_patch(plt.Rectangle((cell.column, cell.row), 1, 1, fill=False,
                                       edgecolor=self.zone_colors.get(target.zone, '#999999'),
                                       linewidth=2.5))

    def visualize_scores(self, layout: WarehouseLayout,
                         product: Product,
                         level: int = 0,
                         axis_constraint: Optional[AxisConstraint] = None,
                         weights: Optional[ScoringWeights] = None,
                         save_path: Optional[str] = None) -> plt.Figure:
        """Placement score heatmap of one level for a product (lower is better)"""
        ranking = rank_cells(layout, product, axis_constraint, weights)
        level_df = ranking[ranking['level'] == level]

        fig, ax = plt.subplots(1, 1, figsize=(self.figsize[0], self.figsize[1] / 2))
        if level_df.empty:
            ax.set_title(f'No candidates on level {level + 1}', fontsize=14)
            return fig

        grid = level_df.pivot(index='row', columns='column', values='score').astype(float)
        sns.heatmap(grid, annot=True, fmt='.0f', cmap='YlOrRd_r',
                    cbar_kws={'label': 'Placement score'},
                    ax=ax)

        best = ranking.iloc[0]
        ax.set_title(f'Placement scores for {product.name} (volume {product.volume:g}) - '
                     f'best {best["cell_id"]}', fontsize=14, weight='bold')
        ax.set_xlabel('Column index')
        ax.set_ylabel('Row index')
        plt.tight_layout()

        if save_path:
            plt.savefig(save_path, dpi=150, bbox_inches='tight')
            self.logger.info(f"Score map saved to {save_path}")

        return fig
